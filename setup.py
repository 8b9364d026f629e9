from setuptools import setup, find_packages

VERSION = "0.1.0"
REQUIRES = ["requests>=2.6.0", "click>=7.0", "fastapi", "uvicorn"]
TESTS_REQUIRE = ["pytest", "mock", "requests-mock"]

setup(
    name='minipact',
    packages=find_packages(),
    version=VERSION,
    description='Minimal consumer driven contract testing library.',
    keywords=['testing', 'pact', 'contract'],
    classifiers=[],
    python_requires='>=3.7',
    install_requires=REQUIRES,
    extras_require={'test': TESTS_REQUIRE},
    entry_points={
        'console_scripts': ['minipact=minipact.cli:main'],
    })
