#!/usr/bin/env python3
"""
Example script demonstrating the usage of tagflags.

Every annotated field of the record becomes a flag named after the field. The
annotation holds the description and, after a '|', the default value.

Try:
    python basic_example.py --IQ=100 --Verbose=true one two
    python basic_example.py --SomeCommand "ls | wc -l"
"""

import logging
from typing import Annotated

from tagflags import parse


class Options:
    """Command-line options of the demonstrator."""

    Usage: Annotated[str, "tagflags demonstrator"] = ""
    SomeFile: Annotated[str, "contains the something      | /dev/null"] = ""
    IQ: Annotated[int, "do not inflate              | 42"] = 0
    GDP: Annotated[float, "in Vietnamese Dong          | 42000000000000000000000000.0"] = 0.0
    Age: Annotated[int, "in milliseconds since epoch | 42000000000000"] = 0
    SomeCommand: Annotated[str, "! is command that might contain pipe char ! 'yes | head'"] = ""
    Verbose: Annotated[bool, "Bool flags require use of an equals sign syntax | false"] = False
    OutData: Annotated[str, " must be writable | /an/output/file"] = ""
    Args: list[str] = []


def main() -> None:
    """Main function demonstrating the parser."""
    logging.basicConfig(level=logging.INFO)
    opt = parse(Options())

    if opt.Verbose:
        print(opt.Usage)
        print()

    print("SomeFile=", opt.SomeFile)
    print("Age=", opt.Age)
    print("IQ=", opt.IQ)
    print("GDP=", opt.GDP)
    print("SomeCommand=", opt.SomeCommand)
    print("Verbose=", opt.Verbose)
    print("OutData=", opt.OutData)
    for ii, aa in enumerate(opt.Args):
        print("arg num", ii, ":", aa)


if __name__ == "__main__":
    main()
