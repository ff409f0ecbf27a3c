"""Recording stand-ins for the stores, readers, validator and publisher."""