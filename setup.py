import setuptools
import os

own_dir = os.path.abspath(os.path.dirname(__file__))


def requirements():
    with open(os.path.join(own_dir, 'requirements.txt')) as f:
        for line in f.readlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            yield line


def packages():
    return setuptools.find_packages(
        include=['release_candidate', 'release_candidate.*'],
    )


def version():
    with open(os.path.join(own_dir, 'VERSION')) as f:
        return f.read().strip()


setuptools.setup(
    name='release-candidate',
    version=version(),
    description='Creates release-candidate pull requests from pull requests merged since the last '
    'release',
    python_requires='>=3.11',
    packages=packages(),
    install_requires=list(requirements()),
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'release-candidate = release_candidate.cli:main',
        ],
    },
)
