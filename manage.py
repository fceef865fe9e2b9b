#!/usr/bin/env python
import os
import sys


def main():
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dfa_service.settings')
    from django.core.management import execute_from_command_line

    # The service historically listened on 127.0.0.1:3030
    if sys.argv[1:] == ['runserver']:
        sys.argv.append('127.0.0.1:3030')
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
