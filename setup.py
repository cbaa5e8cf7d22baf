"""A parsing and validation engine for command-line interfaces:
declare a tree of commands, options, and arguments, then match argv
against it, with arity checks, typed values, and did-you-mean
suggestions.
"""

from setuptools import setup


__version__ = '0.1.0dev'
__license__ = 'BSD'


setup(name='argtree',
      version=__version__,
      description="A command-line parsing and validation engine for trees of commands, options, and arguments.",
      long_description=__doc__,
      packages=['argtree', 'argtree.test'],
      include_package_data=True,
      zip_safe=False,
      license=__license__,
      platforms='any',
      python_requires='>=3.7',
      install_requires=['boltons>=20.0.0'],
      extras_require={'test': ['pytest']},
      classifiers=[
          'Topic :: Utilities',
          'Intended Audience :: Developers',
          'Topic :: Software Development :: Libraries',
          'Programming Language :: Python :: 3.7',
          'Programming Language :: Python :: 3.8',
          'Programming Language :: Python :: 3.9',
          'Programming Language :: Python :: 3.10',
          'Programming Language :: Python :: 3.11',
          'Programming Language :: Python :: 3.12',
          'Programming Language :: Python :: 3 :: Only',
          'Programming Language :: Python :: Implementation :: CPython',
          'Programming Language :: Python :: Implementation :: PyPy', ]
      )

"""
A brief checklist for release:

* pytest argtree
* git commit (if applicable)
* Bump setup.py version off of dev
* git commit -a -m "bump version for vx.y.z release"
* rm -rf dist/*
* python setup.py sdist bdist_wheel
* twine upload dist/*
* git tag -a vx.y.z -m "brief summary"
* write CHANGELOG
* git commit
* bump setup.py version onto n+1 dev
* git commit
* git push

"""
