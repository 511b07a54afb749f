# this example's command line is: main.py --path ./hello.txt --value 42
# and also it can be: main.py -p ./hello.txt -v 42
# and also it can be: main.py /path ./hello.txt /value 42
from rich.pretty import pprint

from cmdpro import *

processor = CommandLineProcessor(version="cmdpro demo 0.0.0", shell=True, fancy=True)

path = processor.add_parameter("path", ParameterType.PATH, descr="file path desc", aliases=["-p"])
value = processor.add_parameter("value", ParameterType.UNSIGNED_INTEGER, descr="value desc", aliases=["-v"])


if __name__ == '__main__':
    if (values := processor.parse_command_line()) is not None:
        pprint(values)
        pprint(values.read_path(path, "(none)"))
        pprint(values.read_unsigned_integer(value, 0))
