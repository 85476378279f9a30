"""
Hostwright Test Suite

Unit tests for the plist command translator, the pyinfra facts and
operations, resources, the compiler, core pipeline, settings and CLI.
"""
