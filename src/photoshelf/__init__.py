"""
photoshelf - Month-by-month photo gallery on Supabase with Streamlit

A small application for keeping a personal photo collection with features including:
- Photo upload into Supabase Storage organised by year/month
- Month-by-month gallery browsing with preview and delete
- Image metadata kept in a Supabase (PostgreSQL) table
- Supabase password authentication
- One-off export of every image and its metadata to local disk
"""

__version__ = "0.1.0"
__author__ = "photoshelf"
__description__ = "Month-by-month photo gallery on Supabase with Streamlit"
