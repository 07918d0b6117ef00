from setuptools import setup, find_packages

setup(
    name='aggdef',
    version='0.0.1',
    author='Marc Hadfield',
    author_email='marc@vital.ai',
    description='Aggregate definition compiler',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=["test", "test.*", "test_data", "test_scripts"]),
    license='Apache License 2.0',
    install_requires=[

        'lark>=1.2.2',
        'pyyaml',
        'tqdm',

    ],
    extras_require={

        'test': ['pytest'],

    },
    entry_points={
        'console_scripts': [
            'aggdef=aggdef.__main__:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3.12",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.11',
)
