"""
Seed catalog: common minimarket products shipped with the app.
Never persisted; always merged below the user's own history.
"""
from .models import ProductSuggestion


def _seed(name: str, price: int) -> ProductSuggestion:
    return ProductSuggestion(name=name, price=price, source="database")


SEED_CATALOG: tuple[ProductSuggestion, ...] = (
    _seed("Indomie Goreng", 3100),
    _seed("Indomie Soto Mie", 3500),
    _seed("Indomie Ayam Bawang", 3000),
    _seed("Mie Sedaap Goreng", 3200),
    _seed("Aqua 600ml", 3500),
    _seed("Aqua 1500ml", 6000),
    _seed("Le Minerale 600ml", 3500),
    _seed("Teh Botol Sosro 450ml", 5500),
    _seed("Teh Pucuk Harum 350ml", 3500),
    _seed("Pocari Sweat 500ml", 7500),
    _seed("Coca-Cola 390ml", 5000),
    _seed("Kopi Kapal Api Special Mix", 1500),
    _seed("Good Day Cappuccino", 1500),
    _seed("Susu Ultra Milk Coklat 250ml", 6500),
    _seed("Bear Brand 189ml", 10500),
    _seed("Roti Tawar Sari Roti", 16000),
    _seed("Chitato Sapi Panggang 68g", 11500),
    _seed("Taro Net Seaweed 65g", 8000),
    _seed("Oreo Vanilla 133g", 9500),
    _seed("Beng-Beng", 2500),
    _seed("SilverQueen 58g", 14500),
    _seed("Gula Pasir Gulaku 1kg", 18000),
    _seed("Minyak Goreng Bimoli 2L", 38000),
    _seed("Beras Pandan Wangi 5kg", 75000),
    _seed("Telur Ayam 1kg", 29000),
    _seed("Kecap Bango 220ml", 12000),
    _seed("Sambal ABC 335ml", 14000),
    _seed("Sabun Lifebuoy 85g", 4500),
    _seed("Pepsodent 190g", 13000),
    _seed("Rinso Anti Noda 770g", 24000),
    _seed("Sunlight Jeruk Nipis 755ml", 16500),
    _seed("Tissue Paseo 250 Sheets", 14000),
)
