from setuptools import setup

requirements = [
    'arsenal',
    'graphviz',
    'numpy',
    'pandas',
    'tqdm',
]


setup(
    name='ostia',
    version='0.1',
    description='Onward subsequential transducer inference (OSTIA)',
    install_requires=requirements,
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.10',
    readme='',
    scripts=[],
    packages=['ostia'],
)
