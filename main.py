from rich import print
from rich.pretty import pprint

from clapp import *

parser = ArgumentParser(
    "Sample Application",
    version="1.0.0",
    descr="Some really useful cli program.",
)
parser.add_help()
parser.add_version()

settings = {"cfg": "", "silent": False}
parser.option(
    "-c", "--cfg",
    required=True,
    metavar="json config file",
    descr="Sets the config file.",
    store=binder(settings, "cfg"),
)
parser.option("-s", flag=True, descr="Silent mode", store=binder(settings, "silent"))
flag = parser.option("-f", flag=True, descr="Flag for something.")


if __name__ == '__main__':
    parser.run()
    print(f"Config file: [bold]{settings["cfg"]}[/bold]")
    print(f"Silent mode set: {settings["silent"]}")
    print(f"Flag set: {flag.value}")
    pprint(flag)
