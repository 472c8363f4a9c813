# -*- encoding: utf-8 -*-
# @File   : __main__.py
# @Time   : 2025/03/03 02:10:55
# @Author : Kariko Lin

import argparse
import codecs
import logging
import sys

from .ini.model import to_bool
from .inifile import IniFile

TYPES = ('str', 'int', 'double', 'bool')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='inihandler',
        description='Read or edit one value of an INI file, in place.')
    parser.add_argument('file', help='Path to the INI file.')
    parser.add_argument(
        '-e', '--encoding', default='utf-8',
        help='Text encoding of the file (default: utf-8).')
    sub = parser.add_subparsers(dest='command', required=True)

    get = sub.add_parser('get', help='Print one value.')
    get.add_argument('section')
    get.add_argument('key')
    get.add_argument('-t', '--type', choices=TYPES, default='str')

    put = sub.add_parser(
        'set', help='Change one value and save, creating the file if needed.')
    put.add_argument('section')
    put.add_argument('key')
    put.add_argument('value')
    put.add_argument('-t', '--type', choices=TYPES, default='str')

    sub.add_parser('dump', help='Print every section and pair.')
    return parser.parse_args(argv)


def _get(ini: IniFile, args) -> None:
    match args.type:
        case 'int':
            print(ini.get_int(args.section, args.key))
        case 'double':
            print(ini.get_double(args.section, args.key))
        case 'bool':
            print('true' if ini.get_bool(args.section, args.key) else 'false')
        case _:
            print(ini.get_value(args.section, args.key))


def _set(ini: IniFile, args) -> None:
    match args.type:
        case 'int':
            ini.set_int(args.section, args.key, int(args.value))
        case 'double':
            ini.set_double(args.section, args.key, float(args.value))
        case 'bool':
            ini.set_bool(args.section, args.key, to_bool(args.value))
        case _:
            ini.set_value(args.section, args.key, args.value)
    ini.commit_changes()


def _dump(ini: IniFile) -> None:
    for section in ini.store.values():
        print(section)
        for key, value in section.items():
            print(f'{key} = {value}')


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO,
                        format='[%(asctime)s] %(levelname)s: %(message)s')

    ini = IniFile(encoding=args.encoding)
    try:
        # fail before `set` gets to create the file.
        codecs.lookup(args.encoding)
        try:
            ini.set_filename(args.file)
        except FileNotFoundError:
            if args.command != 'set':
                raise
        match args.command:
            case 'get':
                _get(ini, args)
            case 'set':
                _set(ini, args)
            case 'dump':
                _dump(ini)
    # NotFoundError and an unknown --encoding are both LookupError,
    # ConversionError and a bad typed value are ValueError.
    except (LookupError, ValueError, OSError) as exc:
        logging.error('%s', exc)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
