from proxyplane.cli.main import cli

cli()
