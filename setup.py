from setuptools import setup

setup(
    name="osu-beatmap",
    version="1.0",
    python_requires='>=3.10',
    packages=[
        "osu_beatmap",
        "osu_beatmap.scripts",
    ],
    install_requires=[
        "numpy",
        "jaxtyping",
        "beartype",
        "click",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest", "bezier"],
    },
)
