"""Exports of NEXUS data to other formats."""