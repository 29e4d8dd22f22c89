"""Domain core: pairing, records, histories, aggregation and the document format"""
