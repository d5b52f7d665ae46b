"""Image loading and saving for PPM, Targa, PNG, JPEG and RGBE files."""