"""Notarization core: asset collection, credential resolution, notarize+verify."""
