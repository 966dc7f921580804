from setuptools import setup, find_namespace_packages

def readme() -> str:
    with open('README.md', 'r') as stream:
        return stream.read()

setup(
    name = 'rsldoc',
    description = 'Builds, parses and validates Really Simple Licensing (RSL) documents.',
    long_description = readme(),
    long_description_content_type = 'text/markdown',
    version = '0.1.0',
    packages = find_namespace_packages(where = 'src'),
    package_dir = {"": "src"},
    python_requires = '>=3.9',
    classifiers = [
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent"
    ],
    install_requires = [
        'beautifulsoup4',       # building, parsing
        'lxml'                  # parsing
    ],
    extras_require = {
        'test': ['pytest']
    },
    entry_points = {'console_scripts': ['rsldoc=rsldoc.cli:parse_args']}
)
