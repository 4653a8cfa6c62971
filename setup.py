"""
Provides project-level commands. Commands are run via `python setup.py <command> [args]`

Commands available:

- apidoc: regenerate reST docs for inline pydoc comments
- autobuild: watch for changes to the reST files and rebuild the documentation, refreshing
   the browser.
"""

from setuptools import setup, Command

import os


class RunInRootCommand(Command):
    user_options = []

    def initialize_options(self):
        self.cwd = None

    def finalize_options(self):
        self.cwd = os.getcwd()

    def run(self):
        assert os.getcwd() == self.cwd, 'Must be in package root: %s' % self.cwd
        self.runcmd()

    def runcmd(self):
        pass


class ApiDocCommand(RunInRootCommand):
    description = "regenerates the API docs"

    def runcmd(self):
        os.system('"sphinx-apidoc" -f -e -o docs/apidoc src')


class AutoBuildCommand(RunInRootCommand):
    description = "watches the docs for changes and rebuilds them, automatically refreshing the browser page"

    def runcmd(self):
        os.system("sphinx-autobuild docs docs/_build/html -B")


setup(
    name='driversandbox',
    version='0.0.1',
    description='Local emulation of the custom driver host platform API.',
    url='',
    author='',
    author_email='',
    license='GPLv3',
    package_dir={'': 'src'},
    packages=['driversandbox', 'driversandbox.config', 'driversandbox.protocol', 'driversandbox.results',
              'driversandbox.support', 'driversandbox.winrm'],
    package_data={'driversandbox.config': ['*.cfg']},
    install_requires=['configobj'],
    extras_require={
        'test': ['pytest', 'PyHamcrest', 'timeout-decorator']
    },
    python_requires='>=3.6',
    zip_safe=False,
    cmdclass={
        'apidoc': ApiDocCommand,
        'autobuild': AutoBuildCommand
    }
)
