# Core modules for clustercode
