"""Sample code exercised by the test suite."""
