import os
from setuptools import setup, find_packages

version = '0.1'

if os.path.exists("README.rst"):
    long_description = open("README.rst").read()
else:
    long_description = "Validate python data structures against declarative " \
                       "schemas and get back every violation."

setup(name='JsonCheck',
      version=version,
      description="Validate structured data against declarative schemas and "
                  "report every violation.",
      long_description=long_description,
      keywords='json schema validation',
      author='',
      author_email='',
      url='',
      license='BSD',
      packages=find_packages(exclude=['examples', 'tests', '*.tests']),
      include_package_data=True,
      zip_safe=False,
      python_requires='>=3.8',
      install_requires=[
          # -*- Extra requirements: -*-
      ],
      extras_require={
          'test': ['pytest'],
      },
      entry_points="""
      # -*- Entry points: -*-
      """,
      classifiers=[
          'Development Status :: 3 - Alpha',
          'Intended Audience :: Developers',
          'License :: OSI Approved :: BSD License',
          'Operating System :: OS Independent',
          'Programming Language :: Python :: 3',
          'Programming Language :: Python :: Implementation :: CPython',
          'Topic :: Software Development :: Libraries :: Python Modules'
      ]
      )
