from mcpal.cli.app import cli

cli()
