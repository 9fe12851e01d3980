#!/usr/bin/env python
import os
import sys

from dotenv import load_dotenv


def main():
    load_dotenv()
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "herbsayurmed.settings.base")
    from django.core.management import execute_from_command_line

    argv = list(sys.argv)
    # Listen on $PORT when runserver is started without an address
    if argv[1:] == ["runserver"]:
        argv.append(f"0.0.0.0:{os.getenv('PORT', '5000')}")
    execute_from_command_line(argv)


if __name__ == "__main__":
    main()
