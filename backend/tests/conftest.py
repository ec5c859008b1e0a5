import os

# Must be set before any clubhub module reads the configuration.
os.environ["ENVIRONMENT"] = "CI"
