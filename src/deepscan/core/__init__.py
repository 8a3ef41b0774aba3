"""Core building blocks shared by the scan pipeline and its hosting surfaces."""
