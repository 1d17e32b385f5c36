from jaxtyping import install_import_hook
install_import_hook(__package__, "beartype.beartype") # type: ignore

import click

from .scripts.info import info
from .scripts.inspect_map import inspect

@click.group()
def main():
    pass

main.add_command(info)
main.add_command(inspect)

if __name__ == "__main__":
    main()
