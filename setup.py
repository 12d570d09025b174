from setuptools import setup, find_packages

def parse_requirements(requirements):
    with open(requirements) as f:
        return [l.strip('\n') for l in f if l.strip('\n') and not l.startswith('#')]

requirements = parse_requirements("requirements.txt")

setup(
    name='tracker_backend',
    version='0.1.0',
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    package_data={
        "tracker_backend": ["alembic.ini", "alembic/*.py", "alembic/*.mako", "alembic/versions/*.py"],
    },
    entry_points={
        "console_scripts": [
            "tracker=tracker_backend.cli.cli:cli",
        ],
    }
)
