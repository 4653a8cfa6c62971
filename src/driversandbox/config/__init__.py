"""
A simple configuration helper built on top of ConfigObj that allows configuration files to be
layered - defaults / os-specific / user, with a schema to validate the types of the config data.

The sandbox reads its result limits from here, so they can be matched to a particular host release.
"""
