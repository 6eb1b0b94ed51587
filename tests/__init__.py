"""ctlapi test suite."""
