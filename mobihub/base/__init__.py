"""
Base utilities shared by the mobihub python packages.

:py:mod:`config`
    loading configuration data from files and the environment and configuring logging
"""
