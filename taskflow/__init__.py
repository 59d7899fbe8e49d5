"""TaskFlow notification delivery package.

Keeping this file makes ``taskflow`` a regular package so it is never resolved
through namespace package lookup against unrelated modules in site-packages.
"""
