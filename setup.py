from setuptools import setup, find_packages
import datetime

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="robotframework-pagediff",
    version="0.1.0.dev" + datetime.datetime.now().strftime("%Y%m%d%H%M%S"),
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["PageDiff", "PageDiff.*"]),
    install_requires=['PyMuPDF', 'numpy', 'opencv-python-headless', 'robotframework', 'scikit-image', 'python-dotenv'],
    extras_require={'test': ['pytest', 'coverage', 'invoke']},
    entry_points={'console_scripts': ['pagediff = PageDiff.cli:main']},
    dependency_links=['https://imagemagick.org/script/download.php'],
    python_requires='>=3.8',
    zip_safe=False
)
