# sholat/services/helpers/constants.py

# Gazetteer of Indonesian cities: key, display name, province, latitude, longitude, IANA zone.
# Order matters: it breaks ties when a query matches several cities equally well.
CITY_TABLE = (
    # ACEH (15 kota/kabupaten)
    ("banda aceh", "Banda Aceh", "Aceh", 5.5483, 95.3238, "Asia/Jakarta"),
    ("lhokseumawe", "Lhokseumawe", "Aceh", 5.1870, 97.1413, "Asia/Jakarta"),
    ("langsa", "Langsa", "Aceh", 4.4683, 97.9683, "Asia/Jakarta"),
    ("sabang", "Sabang", "Aceh", 5.8947, 95.3222, "Asia/Jakarta"),
    ("meulaboh", "Meulaboh", "Aceh", 4.1372, 96.1266, "Asia/Jakarta"),
    ("sigli", "Sigli", "Aceh", 5.3864, 95.9619, "Asia/Jakarta"),
    ("bireuen", "Bireuen", "Aceh", 5.2030, 96.7017, "Asia/Jakarta"),
    ("takengon", "Takengon", "Aceh", 4.6272, 96.8286, "Asia/Jakarta"),
    ("calang", "Calang", "Aceh", 4.3667, 95.6667, "Asia/Jakarta"),
    ("jantho", "Jantho", "Aceh", 5.2833, 95.6167, "Asia/Jakarta"),
    ("kutacane", "Kutacane", "Aceh", 3.7333, 97.9167, "Asia/Jakarta"),
    ("blangkejeren", "Blangkejeren", "Aceh", 4.1667, 97.1667, "Asia/Jakarta"),
    ("idi", "Idi", "Aceh", 4.9167, 97.8333, "Asia/Jakarta"),
    ("tapaktuan", "Tapaktuan", "Aceh", 3.2667, 97.2000, "Asia/Jakarta"),
    ("subulussalam", "Subulussalam", "Aceh", 2.6667, 97.9500, "Asia/Jakarta"),

    # SUMATERA UTARA (8 kota)
    ("medan", "Medan", "Sumatera Utara", 3.5952, 98.6722, "Asia/Jakarta"),
    ("binjai", "Binjai", "Sumatera Utara", 3.6000, 98.4833, "Asia/Jakarta"),
    ("tebing tinggi", "Tebing Tinggi", "Sumatera Utara", 3.3281, 99.1625, "Asia/Jakarta"),
    ("pematangsiantar", "Pematangsiantar", "Sumatera Utara", 2.9667, 99.0667, "Asia/Jakarta"),
    ("tanjungbalai", "Tanjungbalai", "Sumatera Utara", 2.9667, 99.8000, "Asia/Jakarta"),
    ("sibolga", "Sibolga", "Sumatera Utara", 1.7425, 98.7792, "Asia/Jakarta"),
    ("padangsidimpuan", "Padangsidimpuan", "Sumatera Utara", 1.3833, 99.2667, "Asia/Jakarta"),
    ("gunungsitoli", "Gunungsitoli", "Sumatera Utara", 1.2833, 97.6167, "Asia/Jakarta"),

    # SUMATERA BARAT (4 kota)
    ("padang", "Padang", "Sumatera Barat", -0.9471, 100.4172, "Asia/Jakarta"),
    ("bukittinggi", "Bukittinggi", "Sumatera Barat", -0.3056, 100.3692, "Asia/Jakarta"),
    ("payakumbuh", "Payakumbuh", "Sumatera Barat", -0.2167, 100.6333, "Asia/Jakarta"),
    ("padangpanjang", "Padangpanjang", "Sumatera Barat", -0.4667, 100.4000, "Asia/Jakarta"),

    # RIAU (3 kota)
    ("pekanbaru", "Pekanbaru", "Riau", 0.5071, 101.4478, "Asia/Jakarta"),
    ("dumai", "Dumai", "Riau", 1.6667, 101.4500, "Asia/Jakarta"),
    ("batam", "Batam", "Kepulauan Riau", 1.1304, 104.0530, "Asia/Jakarta"),

    # JAMBI & BENGKULU (3 kota)
    ("jambi", "Jambi", "Jambi", -1.6101, 103.6131, "Asia/Jakarta"),
    ("bengkulu", "Bengkulu", "Bengkulu", -3.7928, 102.2607, "Asia/Jakarta"),
    ("curup", "Curup", "Bengkulu", -3.4667, 102.5167, "Asia/Jakarta"),

    # SUMATERA SELATAN (3 kota)
    ("palembang", "Palembang", "Sumatera Selatan", -2.9909, 104.7566, "Asia/Jakarta"),
    ("lubuklinggau", "Lubuklinggau", "Sumatera Selatan", -3.3000, 102.8667, "Asia/Jakarta"),
    ("prabumulih", "Prabumulih", "Sumatera Selatan", -3.4333, 104.2333, "Asia/Jakarta"),

    # LAMPUNG (2 kota)
    ("bandar lampung", "Bandar Lampung", "Lampung", -5.4292, 105.2610, "Asia/Jakarta"),
    ("metro", "Metro", "Lampung", -5.1133, 105.3067, "Asia/Jakarta"),

    # JAWA BARAT (5 kota)
    ("bandung", "Bandung", "Jawa Barat", -6.9175, 107.6191, "Asia/Jakarta"),
    ("bekasi", "Bekasi", "Jawa Barat", -6.2383, 106.9756, "Asia/Jakarta"),
    ("bogor", "Bogor", "Jawa Barat", -6.5944, 106.7892, "Asia/Jakarta"),
    ("depok", "Depok", "Jawa Barat", -6.4025, 106.7942, "Asia/Jakarta"),
    ("cirebon", "Cirebon", "Jawa Barat", -6.7063, 108.5571, "Asia/Jakarta"),

    # DKI JAKARTA (1 kota)
    ("jakarta", "Jakarta", "DKI Jakarta", -6.2088, 106.8456, "Asia/Jakarta"),

    # JAWA TENGAH (4 kota)
    ("semarang", "Semarang", "Jawa Tengah", -6.9667, 110.4167, "Asia/Jakarta"),
    ("solo", "Solo", "Jawa Tengah", -7.5663, 110.8281, "Asia/Jakarta"),
    ("yogyakarta", "Yogyakarta", "DI Yogyakarta", -7.8014, 110.3647, "Asia/Jakarta"),
    ("magelang", "Magelang", "Jawa Tengah", -7.4697, 110.2175, "Asia/Jakarta"),

    # JAWA TIMUR (4 kota)
    ("surabaya", "Surabaya", "Jawa Timur", -7.2504, 112.7688, "Asia/Jakarta"),
    ("malang", "Malang", "Jawa Timur", -7.9797, 112.6304, "Asia/Jakarta"),
    ("kediri", "Kediri", "Jawa Timur", -7.8167, 112.0167, "Asia/Jakarta"),
    ("probolinggo", "Probolinggo", "Jawa Timur", -7.7542, 113.2159, "Asia/Jakarta"),

    # BALI & NUSA TENGGARA (3 kota)
    ("denpasar", "Denpasar", "Bali", -8.6500, 115.2167, "Asia/Makassar"),
    ("mataram", "Mataram", "Nusa Tenggara Barat", -8.5833, 116.1167, "Asia/Makassar"),
    ("kupang", "Kupang", "Nusa Tenggara Timur", -10.1718, 123.6075, "Asia/Makassar"),

    # KALIMANTAN (4 kota)
    ("pontianak", "Pontianak", "Kalimantan Barat", 0.0263, 109.3425, "Asia/Jakarta"),
    ("banjarmasin", "Banjarmasin", "Kalimantan Selatan", -3.3194, 114.5906, "Asia/Makassar"),
    ("balikpapan", "Balikpapan", "Kalimantan Timur", -1.2654, 116.8312, "Asia/Makassar"),
    ("samarinda", "Samarinda", "Kalimantan Timur", -0.5022, 117.1536, "Asia/Makassar"),

    # SULAWESI (4 kota)
    ("makassar", "Makassar", "Sulawesi Selatan", -5.1477, 119.4327, "Asia/Makassar"),
    ("manado", "Manado", "Sulawesi Utara", 1.4748, 124.8421, "Asia/Makassar"),
    ("palu", "Palu", "Sulawesi Tengah", -0.8917, 119.8707, "Asia/Makassar"),
    ("kendari", "Kendari", "Sulawesi Tenggara", -3.9450, 122.4989, "Asia/Makassar"),

    # MALUKU & PAPUA (3 kota)
    ("ambon", "Ambon", "Maluku", -3.6954, 128.1814, "Asia/Jayapura"),
    ("jayapura", "Jayapura", "Papua", -2.5337, 140.7181, "Asia/Jayapura"),
    ("sorong", "Sorong", "Papua Barat", -0.8833, 131.2500, "Asia/Jayapura"),
)
