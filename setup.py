"""Install iotsa auth package."""

from setuptools import setup, find_packages

setup(
    name='iotsa-auth',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    package_data={'iotsa_auth': ['templates/iotsa_auth/*.html']},
    include_package_data=True,
    install_requires=[
        "flask>=2.3",
        "werkzeug>=2.3",
        "pyjwt>=2.4",
        "redis",
        "pytz",
        "python-json-logger",
    ],
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.8',
    zip_safe=False
)
