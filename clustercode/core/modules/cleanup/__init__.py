"""Post-transcode cleanup pipeline and stages."""
