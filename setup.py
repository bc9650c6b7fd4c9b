from setuptools import setup

setup(
    name='loggraph',
    version='0.1',
    description='Reconstruct branch lines from git log --graph output',
    author='Iliyas Jorio',
    classifiers=[
        'Topic :: Software Development :: Version Control :: Git',
        'Intended Audience :: Developers',
    ],
    packages=[
        'loggraph',
        'loggraph.graph',
        'loggraph.toolbox',
    ],
    entry_points={
        'console_scripts': ['loggraph=loggraph.__main__:main']
    },
    python_requires='>= 3.11',
    install_requires=[],
    extras_require={
        'benchmark': ['psutil'],
        'test': ['pytest'],
    },
    tests_require=[
        'pytest',
    ],
)
