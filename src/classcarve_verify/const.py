ERRORS = {
  "E_LAYOUT_MISSING": "Required file or directory missing",
  "E_MANIFEST_JSON": "Manifest JSON invalid",
  "E_INTEGRITY_MISMATCH": "Carve root does not match manifest",
  "E_INDEX_READ": "Index is not a readable parquet file",
  "E_INDEX_SCHEMA": "Index is missing required columns",
  "E_CLASS_WALK": "Artifact does not walk as a class file of its own length",
  "E_INDEX_MISMATCH": "Artifact length or hash does not match index",
}
