from .cli_full import cli

if __name__ == "__main__":
    cli()
