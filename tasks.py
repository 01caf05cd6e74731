import pathlib
import subprocess

from invoke import task

import PageDiff
from PageDiff import __version__ as VERSION

ROOT = pathlib.Path(__file__).parent.resolve().as_posix()


@task
def utests(context):
    cmd = [
        "coverage",
        "run",
        "--source=PageDiff",
        "-p",
        "-m",
        "pytest",
        "--junitxml=results/pytest.xml",
        f"{ROOT}/utest",
    ]
    completed = subprocess.run(" ".join(cmd), shell=True, check=False)
    if completed.returncode != 0:
        raise Exception("Tests failed")


@task
def coverage_report(context):
    subprocess.run("coverage combine", shell=True, check=False)
    subprocess.run("coverage report", shell=True, check=False)
    subprocess.run("coverage html -d results/htmlcov", shell=True, check=False)


@task(utests, coverage_report)
def tests(context):
    pass


@task
def libdoc(context):
    source = f"{ROOT}/PageDiff/DocumentPagesTest.py"
    for target in (f"{ROOT}/docs/DocumentPagesTest.html", f"{ROOT}/docs/DocumentPagesTest-{VERSION}.html"):
        cmd = [
            "python",
            "-m",
            "robot.libdoc",
            "-n",
            "DocumentPagesTest",
            "-v",
            VERSION,
            source,
            target,
        ]
        subprocess.run(" ".join(cmd), shell=True)


@task
def readme(context):
    doc_string = PageDiff.__doc__ or ""
    with open(f"{ROOT}/README.md", "w", encoding="utf-8") as readme:
        readme.write(str(doc_string).strip() + "\n")
