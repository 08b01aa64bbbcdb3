"""
Session data source.

Holds which assets the dashboard is showing for one browser session: the
bundled inventory, an optional upload, and the combine/replace mode.  The
value is immutable; every transition returns a new instance, and the
Streamlit app swaps the whole value in ``st.session_state``.  A failed
upload therefore cannot leave a half-updated source behind.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from ..ingestion.csv_parser import load_uploaded_file
from ..models.data_models import Asset, DataMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionDataSource:
    default_assets: Tuple[Asset, ...] = ()
    uploaded_assets: Optional[Tuple[Asset, ...]] = None
    upload_name: Optional[str] = None
    mode: DataMode = DataMode.COMBINED

    @classmethod
    def from_defaults(cls, assets):
        return cls(default_assets=tuple(assets))

    @property
    def has_upload(self):
        return self.uploaded_assets is not None

    @property
    def active_assets(self):
        """Assets the dashboard should render right now.

        No upload: the bundled assets.  Combined: bundled then uploaded, in
        order.  Upload-only: just the uploaded assets.
        """
        if self.uploaded_assets is None:
            return self.default_assets
        if self.mode == DataMode.UPLOAD_ONLY:
            return self.uploaded_assets
        return self.default_assets + self.uploaded_assets

    def with_upload(self, assets, name=None):
        return replace(self, uploaded_assets=tuple(assets), upload_name=name)

    def with_mode(self, mode):
        mode = DataMode(mode)
        if mode != self.mode:
            logger.info(f"Data mode changed: {self.mode.value} -> {mode.value}")
        return replace(self, mode=mode)

    def cleared(self):
        """Drop the upload and return to combined mode."""
        if self.has_upload:
            logger.info(f"Cleared upload {self.upload_name}")
        return replace(self, uploaded_assets=None, upload_name=None, mode=DataMode.COMBINED)


def apply_upload(source, filename, content):
    """Parse an uploaded file and return a source holding it.

    Ingestion errors propagate unchanged; ``source`` itself is never
    modified, so the caller simply keeps it on failure.
    """
    assets = load_uploaded_file(filename, content)
    logger.info(f"Applied upload {filename}: {len(assets)} assets ({source.mode.value})")
    return source.with_upload(assets, filename)
