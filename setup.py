from setuptools import setup

setup(
    name='filecomplete',
    version='0.0.1',
    packages=['filecomplete'],
    install_requires=[
        'PyGObject',
    ],
    entry_points={
        'gui_scripts': [
            'filecomplete = filecomplete.__main__:main'
        ]
    },
)
