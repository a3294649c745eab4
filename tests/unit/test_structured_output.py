"""Unit tests for the output directory stages."""

import shutil
import tempfile
import unittest
from datetime import datetime
from pathlib import Path, PurePath

from clustercode.config import CleanupConfig
from clustercode.core.modules.cleanup.file_relocator import FileRelocator
from clustercode.core.modules.cleanup.processors import (
    create_output_directory_tree,
    strip_lane,
    structured_output_processor,
    unified_output_processor,
)
from clustercode.core.modules.errors import MalformedCandidatePathError, OutputWriteError
from clustercode.core.modules.models import CleanupContext, MediaCandidate, TranscodeFinishedEvent
from clustercode.core.modules.system.filesystem import LocalFileSystem, MemoryFileSystem

FIXED_TIME = datetime(2024, 1, 31, 14, 30, 5)


def _context(relative_path, temporary_path, successful=True):
    media = MediaCandidate(relative_path=Path(relative_path), priority=int(Path(relative_path).parts[0]))
    return CleanupContext(event=TranscodeFinishedEvent(media, Path(temporary_path), successful))


class TestOutputDirectoryTree(unittest.TestCase):

    def setUp(self):
        self.fs = MemoryFileSystem()

    def test_strip_lane(self):
        self.assertEqual(strip_lane(PurePath("0/subdir/file.ext")), PurePath("subdir/file.ext"))
        self.assertEqual(strip_lane(PurePath("12/file.ext")), PurePath("file.ext"))

    def test_tree_is_independent_of_lane(self):
        for lane in ("0", "1", "42"):
            with self.subTest(lane=lane):
                target = create_output_directory_tree(
                    PurePath(f"{lane}/subdir/file.mp4"), Path("/out"), self.fs)

                self.assertEqual(target, Path("/out/subdir/file.mp4"))
                self.assertEqual(target.parent, Path("/out/subdir"))

    def test_parent_created_but_not_file(self):
        target = create_output_directory_tree(PurePath("0/a/b/file.mp4"), Path("/out"), self.fs)

        self.assertTrue(self.fs.is_dir("/out/a/b"))
        self.assertFalse(self.fs.exists(target))

    def test_malformed_paths(self):
        for bad in ("file.mp4", "/0/file.mp4", ""):
            with self.subTest(path=bad):
                with self.assertRaises(MalformedCandidatePathError):
                    create_output_directory_tree(PurePath(bad), Path("/out"), self.fs)

    def test_malformed_path_is_value_error(self):
        with self.assertRaises(ValueError):
            strip_lane(PurePath("file.mp4"))


class TestStructuredOutputProcessor(unittest.TestCase):
    """Relocation into the mirrored output tree."""

    def setUp(self):
        self.fs = MemoryFileSystem()
        self.fs.add_file("/tmp/work/ep01.mkv", b"transcoded")
        self.config = CleanupConfig(base_output_dir=Path("/out"), base_input_dir=Path("/in"))
        self.relocator = FileRelocator(self.fs, clock=lambda: FIXED_TIME)
        self.stage = structured_output_processor(self.config, self.relocator, self.fs)

    def test_creates_output_root(self):
        self.assertTrue(self.fs.is_dir("/out"))

    def test_moves_into_mirrored_directory(self):
        context = _context("3/show/season 1/ep01.mp4", "/tmp/work/ep01.mkv")

        result = self.stage(context)

        self.assertIs(result, context)
        self.assertEqual(result.output_path, Path("/out/show/season 1/ep01.mkv"))
        self.assertEqual(self.fs.read_bytes("/out/show/season 1/ep01.mkv"), b"transcoded")
        self.assertFalse(self.fs.exists("/tmp/work/ep01.mkv"))

    def test_uses_temporary_file_name(self):
        """The container may change, so the temp file name wins over the source name."""
        context = _context("0/movie.avi", "/tmp/work/ep01.mkv")

        result = self.stage(context)

        self.assertEqual(result.output_path, Path("/out/ep01.mkv"))

    def test_failed_event_is_left_untouched(self):
        before_files = dict(self.fs.files)
        before_dirs = set(self.fs.dirs)
        context = _context("0/show/ep01.mp4", "/tmp/work/ep01.mkv", successful=False)

        result = self.stage(context)

        self.assertIs(result, context)
        self.assertIsNone(result.output_path)
        self.assertEqual(self.fs.files, before_files)
        self.assertEqual(self.fs.dirs, before_dirs)

    def test_existing_destination_without_overwrite(self):
        self.fs.add_file("/out/show/ep01.mkv", b"previous")
        context = _context("0/show/ep01.mp4", "/tmp/work/ep01.mkv")

        result = self.stage(context)

        self.assertEqual(result.output_path, Path("/out/show/ep01.2024-01-31.14-30-05.mkv"))
        self.assertEqual(self.fs.read_bytes("/out/show/ep01.mkv"), b"previous")

    def test_existing_destination_with_overwrite(self):
        config = CleanupConfig(base_output_dir=Path("/out"), base_input_dir=Path("/in"), overwrite_files=True)
        stage = structured_output_processor(config, self.relocator, self.fs)
        self.fs.add_file("/out/show/ep01.mkv", b"previous")

        result = stage(_context("0/show/ep01.mp4", "/tmp/work/ep01.mkv"))

        self.assertEqual(result.output_path, Path("/out/show/ep01.mkv"))
        self.assertEqual(self.fs.read_bytes("/out/show/ep01.mkv"), b"transcoded")

    def test_existing_output_directories_are_fine(self):
        self.fs.add_dir("/out/show")
        context = _context("0/show/ep01.mp4", "/tmp/work/ep01.mkv")

        self.assertEqual(self.stage(context).output_path, Path("/out/show/ep01.mkv"))

    def test_write_failure_leaves_output_path_unset(self):
        self.fs.deny_write("/out")
        context = _context("0/show/ep01.mp4", "/tmp/work/ep01.mkv")

        with self.assertRaises(OutputWriteError):
            self.stage(context)

        self.assertIsNone(context.output_path)
        self.assertTrue(self.fs.exists("/tmp/work/ep01.mkv"))

    def test_malformed_candidate_path(self):
        context = CleanupContext(event=TranscodeFinishedEvent(
            MediaCandidate(Path("ep01.mp4"), 0), Path("/tmp/work/ep01.mkv"), True))

        with self.assertRaises(MalformedCandidatePathError):
            self.stage(context)

        self.assertIsNone(context.output_path)


class TestUnifiedOutputProcessor(unittest.TestCase):

    def setUp(self):
        self.fs = MemoryFileSystem()
        self.fs.add_file("/tmp/work/ep01.mkv", b"transcoded")
        self.config = CleanupConfig(base_output_dir=Path("/out"), base_input_dir=Path("/in"))
        self.stage = unified_output_processor(self.config, FileRelocator(self.fs, lambda: FIXED_TIME), self.fs)

    def test_flattens_structure(self):
        result = self.stage(_context("1/show/season 1/ep01.mp4", "/tmp/work/ep01.mkv"))

        self.assertEqual(result.output_path, Path("/out/ep01.mkv"))
        self.assertFalse(self.fs.exists("/out/show"))

    def test_failed_event(self):
        result = self.stage(_context("1/show/ep01.mp4", "/tmp/work/ep01.mkv", successful=False))

        self.assertIsNone(result.output_path)
        self.assertTrue(self.fs.exists("/tmp/work/ep01.mkv"))


class TestStructuredOutputOnDisk(unittest.TestCase):
    """Same behaviour through the real filesystem."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.work = self.temp_dir / "work"
        self.work.mkdir()
        self.config = CleanupConfig(base_output_dir=self.temp_dir / "out", base_input_dir=self.temp_dir / "in")
        fs = LocalFileSystem()
        self.stage = structured_output_processor(self.config, FileRelocator(fs, lambda: FIXED_TIME), fs)

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_relocates_and_keeps_existing(self):
        existing = self.temp_dir / "out" / "subdir" / "file.mp4"
        existing.parent.mkdir(parents=True)
        existing.write_bytes(b"old")
        temp_file = self.work / "file.mp4"
        temp_file.write_bytes(b"new")

        result = self.stage(_context("0/subdir/file.mp4", temp_file))

        self.assertEqual(result.output_path, self.temp_dir / "out" / "subdir" / "file.2024-01-31.14-30-05.mp4")
        self.assertEqual(existing.read_bytes(), b"old")
        self.assertEqual(result.output_path.read_bytes(), b"new")
        self.assertFalse(temp_file.exists())


if __name__ == '__main__':
    unittest.main()
