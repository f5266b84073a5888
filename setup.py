from setuptools import setup, find_packages

setup(
    name="fieldlinalg",
    version="1.0",
    description="Dense linear algebra over float, complex and exact rational scalars",
    long_description=("Matrices, vectors, Gauss-Jordan row reduction, determinant, inverse, rank and a linear system "
                      "solver returning the complete affine solution set, written once for three scalar domains: "
                      "IEEE floating point, complex numbers and overflow-guarded exact rationals"),
    long_description_content_type="text/plain",
    license="Apache License 2.0",
    python_requires=">=3.7",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["numpy", "sympy"],
    extras_require={"test": ["pytest", "scipy"]},
    classifiers=[
        "Intended Audience :: Science/Research", "Development Status :: 3 - Alpha", "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10", "Programming Language :: Python :: 3.11", "Programming Language :: Python :: 3.12",
        "Natural Language :: English", "Operating System :: OS Independent", "Topic :: Scientific/Engineering :: Mathematics"
    ],
    keywords=["linear algebra", "gauss-jordan", "rational arithmetic", "linear equations"],
    zip_safe=False,
)
