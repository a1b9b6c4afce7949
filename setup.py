from setuptools import setup, find_packages

setup(
    name='csrun',
    version='0.1.0',
    py_modules=['csrun', 'compiler'],
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'lark',
        'pydantic',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'csrun = csrun:main',
        ],
    },
)
