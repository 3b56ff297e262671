#!/usr/bin/env python3
"""
JSON Handler for filesizehist

Provides utilities for saving and loading JSON data with metadata tracking
and formatting options. Writes go through a temporary file in the target
directory so readers never observe a half-written file.
"""

import json
import os
import logging
import tempfile
from typing import Any, Dict, Union, Optional
from datetime import datetime

logger = logging.getLogger('filesizehist.json')


def save_json_file(data: Any, file_path: str, prettify: bool = False, metadata: Optional[Dict] = None) -> Dict:
    """
    Save data to a JSON file with optional pretty formatting and metadata.

    Any existing file at ``file_path`` is replaced in a single rename.

    Args:
        data: The data to save (must be JSON serializable)
        file_path: Path where the JSON file will be saved
        prettify: If True, format the JSON with indentation for readability
        metadata: Optional additional metadata to include in the returned dict

    Returns:
        Dict containing metadata about the saved file
    """
    file_path = os.path.abspath(os.fspath(file_path))
    directory = os.path.dirname(file_path)
    # Ensure the directory exists
    os.makedirs(directory, exist_ok=True)

    json_metadata = {
        'timestamp': datetime.now().isoformat(),
        'path': file_path,
        'size_bytes': 0,
        'item_count': _count_items(data),
    }
    if metadata:
        json_metadata.update(metadata)

    fd, tmp_path = tempfile.mkstemp(prefix='.' + os.path.basename(file_path) + '.', suffix='.tmp', dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            if prettify:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write('\n')
            else:
                json.dump(data, f, ensure_ascii=False)
        os.replace(tmp_path, file_path)
    except Exception as e:
        logger.error(f"Error saving JSON file {file_path}: {str(e)}")
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise

    json_metadata['size_bytes'] = os.stat(file_path).st_size
    logger.info(f"Successfully saved JSON data to {file_path} ({json_metadata['size_bytes']} bytes)")
    return json_metadata


def load_json_file(file_path: str) -> Union[Dict, list]:
    """
    Load data from a JSON file.

    Args:
        file_path: Path to the JSON file to load

    Returns:
        The loaded JSON data (as dict or list)

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file contains invalid JSON
        UnicodeDecodeError: If the file is not UTF-8
    """
    file_path = os.fspath(file_path)
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"JSON file not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {str(e)}")
        raise
    except Exception as e:
        logger.error(f"Error loading JSON file {file_path}: {str(e)}")
        raise

    logger.debug(f"Successfully loaded JSON data from {file_path}")
    return data


def _count_items(data: Any) -> int:
    """Count the simple values in a JSON structure."""
    if isinstance(data, dict):
        return sum(_count_items(v) for v in data.values())
    elif isinstance(data, list):
        return sum(_count_items(item) for item in data)
    else:
        return 1
