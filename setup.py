from setuptools import setup, find_packages

# dbus-python dispatches signals through the GLib main loop, and the
# ``monitor`` command runs one.  A distro-packaged PyGObject is used as is.
try:
    import gi
    gi.require_version('GLib', '2.0')
    from gi.repository import GLib  # noqa: F401
    _HAS_PYGOBJECT = True
except (ImportError, ValueError, AttributeError):
    _HAS_PYGOBJECT = False

install_requires = [
    "dbus-python>=1.2.0",
    "PyYAML>=6.0",
]

if _HAS_PYGOBJECT:
    monitor_requires = ["PyGObject>=3.48.0"]
else:
    install_requires.append("PyGObject>=3.48.0")
    monitor_requires = []

setup(
    name="simaccess",
    version="0.3.0",
    description="Typed D-Bus proxy for the BlueZ Sim Access Profile client",
    packages=find_packages(include=["simaccess", "simaccess.*"]),
    install_requires=install_requires,
    extras_require={
        "monitor": monitor_requires,
        "test": ["pytest>=8.0.0"],
    },
    entry_points={
        'console_scripts': [
            'simaccess=simaccess.cli:main',
        ],
    },
    python_requires='>=3.8',
)
