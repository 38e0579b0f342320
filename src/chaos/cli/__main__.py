from chaos.cli.commands import run

run()
