"""TIMESCALES

Code written by: Luc IJspeert
"""

from setuptools import setup


# package version
MAJOR = 1
MINOR = 0
ATTR = '0'
# full acronym
ACRONYM = ('Time series Analysis of Irregularly Measured Experiments: '
           'Spectra, Characteristic frequencies And Light curve Statistics')

setup(name="timescales",
      version=f'{MAJOR}.{MINOR}.{ATTR}',
      author='Luc IJspeert',
      license='GNU General Public License v3.0',
      description=ACRONYM,
      long_description=open('README.md').read(),
      long_description_content_type='text/markdown',
      packages=['timescales'],
      package_dir={'timescales': 'timescales'},
      python_requires='>=3.8',
      install_requires=['numpy', 'scipy', 'numba', 'h5py', 'astropy', 'fastprogress', 'matplotlib'],
      extras_require={'test': ['pytest']}
     )
