import click

from .server import server, init_db_command, migrate

@click.group()
def cli():
    pass

cli.add_command(server,"server")
cli.add_command(init_db_command,"init-db")
cli.add_command(migrate,"migrate")

if __name__ == '__main__':
    cli()
