pytest_plugins = ["ci_alert.testing.conftest"]
