import operator

from rich.pretty import pprint

from lexonaut import *

parser = Parser("Look up an item in the inventory.")
every = parser.flag("-a", "--all", descr="list every matching item")
verbosity = parser.aggregate("-v", "--verbose", aggregator=operator.add, constant=1, default=0, descr="increase verbosity")
integer = parser.option("-i", "--integer", type=int, default=0, descr="maximum number of results")
name = parser.positional("name", descr="item to look up")


if __name__ == '__main__':
    pprint(invoke(parser))
