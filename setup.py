from setuptools import setup, find_namespace_packages

setup(
    name="quarkchain_tx",
    version="0.1.0",
    packages=find_namespace_packages(include=["quarkchain_tx", "quarkchain_tx.*"]),
    python_requires=">=3.9",
    install_requires=[
        "rlp",             # canonical encoding
        "pycryptodome",    # keccak-256
        "coincurve",       # secp256k1 recoverable ECDSA
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
