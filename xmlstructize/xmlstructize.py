"""

Command line utility to infer Go structs from XML documents.

"""

import argparse
import json
import os
import shutil
import sys
import tempfile

from xmlstructize import _version
from xmlstructize.errors import XmlStructError

ARG_TYPES = {'str': str, 'int': int}


def load_commands():
    """Load the commands from the commands.json file."""
    commands_path = os.path.join(os.path.dirname(__file__), 'commands.json')
    with open(commands_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def create_subparsers(subparsers, commands):
    """Create subparsers for the commands."""
    for command in commands:
        cmd_parser = subparsers.add_parser(command['command'], help=command['description'])
        for arg in command['args']:
            kwargs = {
                'help': arg['help'],
            }
            if 'nargs' in arg:
                kwargs['nargs'] = arg['nargs']
            if 'choices' in arg:
                kwargs['choices'] = arg['choices']
            if 'default' in arg:
                kwargs['default'] = arg['default']
            if 'dest' in arg:
                kwargs['dest'] = arg['dest']
            if arg['type'] == 'bool':
                # flags whose default is true switch the option off
                kwargs['action'] = 'store_false' if arg.get('default') else 'store_true'
            else:
                kwargs['type'] = ARG_TYPES[arg['type']]
            carg = cmd_parser.add_argument(arg['name'], **kwargs)
            carg.required = arg.get('required', True)


def dynamic_import(module, func):
    """Dynamically import a module and function."""
    mod = __import__(module, fromlist=[func])
    return getattr(mod, func)


def main():
    """Main function for the command line utility."""
    commands = load_commands()
    parser = argparse.ArgumentParser(description='Infer Go structs from XML documents.')
    parser.add_argument('--version', action='store_true', help='Print the version of xmlstructize.')

    subparsers = parser.add_subparsers(dest='command')
    create_subparsers(subparsers, commands)

    args = parser.parse_args()

    if 'version' in args and args.version:
        print(f'xmlstructize {_version.version}')
        return

    if args.command is None:
        parser.print_help()
        return

    temp_input = None
    temp_output = None
    try:
        command = next((cmd for cmd in commands if cmd['command'] == args.command), None)
        if not command:
            print(f"Error: Command {args.command} not found.")
            sys.exit(1)

        input_file_paths = list(getattr(args, 'input', None) or [])
        if not input_file_paths:
            temp_input = tempfile.NamedTemporaryFile(delete=False, mode='wb')
            shutil.copyfileobj(sys.stdin.buffer, temp_input)
            temp_input.close()
            input_file_paths = [temp_input.name]

        output_file_path = getattr(args, 'out', None)
        if output_file_path is None:
            temp_output = tempfile.NamedTemporaryFile(delete=False)
            temp_output.close()
            output_file_path = temp_output.name

        module_name, func_name = command['function']['name'].rsplit('.', 1)
        func = dynamic_import(module_name, func_name)
        func_args = {}
        for arg, val in command['function']['args'].items():
            if val == 'input_file_paths':
                func_args[arg] = input_file_paths
            elif val == 'output_file_path':
                func_args[arg] = output_file_path
            elif val.startswith('args.'):
                if hasattr(args, val[5:]):
                    func_args[arg] = getattr(args, val[5:])
            else:
                func_args[arg] = val
        func(**func_args)

        if temp_output:
            with open(output_file_path, 'r', encoding='utf-8') as f:
                sys.stdout.write(f.read())

    except (XmlStructError, OSError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        for temp in (temp_input, temp_output):
            if temp:
                try:
                    os.remove(temp.name)
                except OSError as e:
                    print(f"Error: Could not delete temporary file {temp.name}. {e}")


if __name__ == "__main__":
    main()
