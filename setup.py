from setuptools import setup, find_packages

with open('requirements.txt') as f:
    required = f.read().splitlines()

setup(
    name='hclscript',
    version='0.1.0',
    description='Compile nested object descriptions of infrastructure into Terraform HCL.',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=required,
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'hclscript=CLI.hcl_cli:main',
        ],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.10',
)
