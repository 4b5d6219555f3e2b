from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="linkcard",
    version="0.1.0",
    description="A personal link-in-bio page with a small JSON API and admin editing",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Framework :: Flask",
    ],
    python_requires=">=3.9",
    install_requires=[
        "Flask>=3.0.0",
        "Flask-CORS>=4.0.0",
        "Flask-Limiter>=3.5",
        "Werkzeug>=3.0",
        "itsdangerous>=2.1",
        "python-dotenv>=1.0.0",
        "requests>=2.28.0",
        "Pillow>=10.0",
        "bcrypt>=4.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-flask>=1.2",
            "black>=22.0",
            "flake8>=5.0",
        ],
    },
    include_package_data=True,
    package_data={
        "linkcard": [
            "modules/*/templates/**/*.html",
            "modules/*/static/*.css",
            "modules/*/static/*.js",
        ],
    },
    zip_safe=False,
)
