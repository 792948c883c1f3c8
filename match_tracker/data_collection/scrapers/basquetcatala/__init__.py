"""Scraper für basquetcatala.cat (Club → Teams → Wettbewerbe → Spiele)."""
