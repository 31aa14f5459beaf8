"""filedrop - static file server with single-file multipart uploads."""
