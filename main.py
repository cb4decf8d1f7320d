from rich.pretty import pprint

from argline import *


hello = (
    Command("/hello")
    .flags("-loud", "-quiet")
    .arg("who", True)
    .arg("greeting", False)
    .subcommand(
        Command("subcommand")
        .flags(["-foo", "-spam"])
        .arg("one", True)
        .arg("two", True)
        .arg("three", True)
    )
)


if __name__ == '__main__':
    pprint(hello)
    pprint(invoke(hello, shell=True, fancy=True))
