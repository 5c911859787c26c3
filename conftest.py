pytest_plugins = ["formtester.pytest_plugin"]
