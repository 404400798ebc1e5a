import re
from typing import Dict

PACKAGE_TUPLE_RE = re.compile(r"\('([^']+)',\s*'([^']+)'\)")


def parse_packages(text: str) -> Dict[str, str]:
    """Extract ('name', 'version') pairs from the repr of a list of tuples.

    Later duplicates overwrite earlier ones. Text without any pair gives an
    empty dict.
    """
    packages: Dict[str, str] = {}
    for name, version in PACKAGE_TUPLE_RE.findall(text):
        packages[name] = version
    return packages
