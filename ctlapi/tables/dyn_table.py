"""
Dyntable XML tables.

Layout::

    <DynTable>
      <MetaData><Column name="..."/>...</MetaData>
      <Data><tr><td>...</td>...</tr>...</Data>
    </DynTable>
"""

import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Union

from ctlapi.core.logger import get_logger
from ctlapi.core.schemas import parse_document

logger = get_logger("tables.dyn")


def fetch_dyn_table(
    connection,
    address: str,
    payload: Optional[Union[str, bytes]] = None,
) -> List[Dict[str, str]]:
    """
    Retrieve a dyntable: POST when a payload is given, GET otherwise.

    Example:
        fetch_dyn_table(connection,
                        '/data/asset/os/dyntable.xml?printDocType=0&tableID=OSSynopsisTable')
    """
    if payload is not None:
        response = connection.post(address, payload)
    else:
        response = connection.get(address)
    return parse_dyn_table(response)


def parse_dyn_table(document: Union[str, bytes]) -> List[Dict[str, str]]:
    """
    Convert a dyntable document into one dict per row.

    Cells are matched to headers by position. When a row and the header
    list differ in length, the extra cells or headers are dropped.
    """
    root = parse_document(document)
    if root is None or root.tag != "DynTable":
        return []

    headers = dyn_headers(root)
    rows = [dict(zip(headers, row)) for row in dyn_rows(root)]
    logger.debug(f"Parsed dyntable: {len(headers)} columns, {len(rows)} rows")
    return rows


def dyn_headers(root: ET.Element) -> List[str]:
    return [column.get("name") for column in root.findall("MetaData/Column")]


def dyn_rows(root: ET.Element) -> List[List[str]]:
    return [dyn_record(row) for row in root.findall("Data/tr")]


def dyn_record(row: ET.Element) -> List[str]:
    return [cell.text or "" for cell in row.findall("td")]
