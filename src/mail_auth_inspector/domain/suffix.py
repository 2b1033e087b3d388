"""Organizational domain lookup over a curated public-suffix table (RFC 7489 section 3.2)."""

from __future__ import annotations

# Multi-label public suffixes only. Single-label TLDs (.com, .de, .fr, ...)
# are covered by the two-label fallback in organizational_domain().
_SUFFIX_ENTRIES = (
    "co.ae", "net.ae", "org.ae", "ac.ae", "gov.ae", "mil.ae", "sch.ae",
    "com.ar", "edu.ar", "gob.ar", "gov.ar", "int.ar", "mil.ar", "net.ar", "org.ar", "tur.ar",
    "com.au", "net.au", "org.au", "edu.au", "gov.au", "asn.au", "id.au",
    "com.bd", "net.bd", "org.bd", "edu.bd", "gov.bd", "ac.bd", "mil.bd",
    "com.bn", "edu.bn", "gov.bn", "net.bn", "org.bn",
    "com.bo", "edu.bo", "gob.bo", "gov.bo", "mil.bo", "net.bo", "org.bo",
    "com.br", "net.br", "org.br", "edu.br", "gov.br", "mil.br",
    "art.br", "blog.br", "eco.br", "emp.br", "eng.br", "esp.br",
    "far.br", "flog.br", "fnd.br", "g12.br", "imb.br", "ind.br",
    "inf.br", "jor.br", "log.br", "mus.br", "not.br", "odo.br",
    "ppg.br", "pro.br", "psc.br", "rec.br", "srv.br", "tmp.br",
    "tur.br", "tv.br", "vet.br", "vlog.br", "wiki.br",
    "com.cn", "net.cn", "org.cn", "edu.cn", "gov.cn", "ac.cn", "mil.cn",
    "ah.cn", "bj.cn", "cq.cn", "fj.cn", "gd.cn", "gs.cn", "gx.cn",
    "gz.cn", "ha.cn", "hb.cn", "he.cn", "hi.cn", "hk.cn", "hl.cn",
    "hn.cn", "jl.cn", "js.cn", "jx.cn", "ln.cn", "mo.cn", "nm.cn",
    "nx.cn", "qh.cn", "sc.cn", "sd.cn", "sh.cn", "sn.cn", "sx.cn",
    "tj.cn", "tw.cn", "xj.cn", "xz.cn", "yn.cn", "zj.cn",
    "com.co", "net.co", "org.co", "edu.co", "gov.co", "mil.co", "nom.co",
    "co.cr", "or.cr", "ac.cr", "ed.cr", "go.cr", "sa.cr",
    "com.cy", "net.cy", "org.cy", "ac.cy", "gov.cy",
    "com.do", "edu.do", "gob.do", "gov.do", "mil.do", "net.do", "org.do",
    "com.ec", "net.ec", "org.ec", "edu.ec", "gov.ec", "mil.ec",
    "com.eg", "edu.eg", "gov.eg", "net.eg", "org.eg", "sci.eg",
    "com.et", "gov.et", "org.et", "edu.et", "net.et",
    "com.gh", "edu.gh", "gov.gh", "org.gh", "mil.gh",
    "com.gt", "edu.gt", "gob.gt", "mil.gt", "net.gt", "org.gt",
    "com.hk", "org.hk", "net.hk", "edu.hk", "gov.hk", "idv.hk",
    "co.id", "ac.id", "go.id", "net.id", "or.id", "web.id", "sch.id", "mil.id",
    "co.il", "ac.il", "org.il", "net.il", "gov.il", "muni.il",
    "co.in", "net.in", "org.in", "ac.in", "edu.in", "gov.in", "mil.in", "res.in",
    "com.jm", "net.jm", "org.jm", "edu.jm", "gov.jm", "mil.jm",
    "com.jo", "net.jo", "org.jo", "edu.jo", "gov.jo", "mil.jo",
    "ac.jp", "ad.jp", "co.jp", "ed.jp", "go.jp", "gr.jp", "lg.jp", "ne.jp", "or.jp",
    "co.ke", "ac.ke", "go.ke", "ne.ke", "or.ke", "sc.ke",
    "com.kh", "edu.kh", "gov.kh", "net.kh", "org.kh",
    "co.kr", "ne.kr", "or.kr", "ac.kr", "go.kr", "re.kr", "pe.kr", "mil.kr",
    "com.kw", "edu.kw", "gov.kw", "net.kw", "org.kw",
    "com.lb", "edu.lb", "gov.lb", "net.lb", "org.lb",
    "com.lk", "org.lk", "edu.lk", "gov.lk", "ac.lk", "net.lk",
    "co.ma", "net.ma", "org.ma", "ac.ma", "gov.ma",
    "com.mm", "net.mm", "org.mm", "edu.mm", "gov.mm",
    "com.mo", "net.mo", "org.mo", "edu.mo", "gov.mo",
    "com.mt", "net.mt", "org.mt", "edu.mt",
    "com.mx", "net.mx", "org.mx", "edu.mx", "gob.mx",
    "com.my", "net.my", "org.my", "edu.my", "gov.my", "mil.my",
    "co.mz", "ac.mz", "org.mz", "edu.mz", "gov.mz",
    "com.ng", "edu.ng", "gov.ng", "net.ng", "org.ng", "mil.ng",
    "com.ni", "edu.ni", "gob.ni", "net.ni", "org.ni",
    "com.np", "edu.np", "gov.np", "net.np", "org.np", "mil.np",
    "co.nz", "net.nz", "org.nz", "ac.nz", "govt.nz", "geek.nz", "school.nz",
    "co.om", "com.om", "edu.om", "gov.om", "net.om", "org.om",
    "com.pa", "ac.pa", "gob.pa", "edu.pa", "net.pa", "org.pa",
    "com.pe", "edu.pe", "gob.pe", "net.pe", "org.pe", "mil.pe",
    "com.ph", "net.ph", "org.ph", "edu.ph", "gov.ph", "mil.ph",
    "com.pk", "net.pk", "org.pk", "edu.pk", "gov.pk",
    "com.pl", "net.pl", "org.pl", "edu.pl", "gov.pl", "mil.pl", "info.pl", "biz.pl",
    "com.pr", "net.pr", "org.pr", "edu.pr", "gov.pr",
    "com.ps", "net.ps", "org.ps", "edu.ps", "gov.ps",
    "com.pt", "org.pt", "net.pt", "edu.pt", "gov.pt",
    "com.py", "edu.py", "gov.py", "mil.py", "net.py", "org.py",
    "com.qa", "edu.qa", "gov.qa", "net.qa", "org.qa",
    "com.sa", "net.sa", "org.sa", "edu.sa", "gov.sa", "med.sa", "sch.sa",
    "com.sg", "net.sg", "org.sg", "edu.sg", "gov.sg", "per.sg",
    "com.sv", "edu.sv", "gob.sv", "org.sv",
    "co.th", "ac.th", "go.th", "net.th", "or.th", "in.th", "mi.th",
    "com.tr", "net.tr", "org.tr", "edu.tr", "gov.tr", "mil.tr",
    "gen.tr", "bel.tr", "av.tr", "dr.tr", "pol.tr", "bbs.tr",
    "com.tw", "net.tw", "org.tw", "edu.tw", "gov.tw", "idv.tw", "mil.tw",
    "co.tz", "ac.tz", "go.tz", "ne.tz", "or.tz", "sc.tz",
    "com.ua", "net.ua", "org.ua", "edu.ua", "gov.ua",
    "co.ug", "ac.ug", "go.ug", "ne.ug", "or.ug", "sc.ug",
    "co.uk", "org.uk", "ac.uk", "gov.uk", "net.uk", "nhs.uk", "police.uk", "sch.uk", "me.uk",
    "com.uy", "edu.uy", "gub.uy", "mil.uy", "net.uy", "org.uy",
    "co.ve", "com.ve", "edu.ve", "gob.ve", "gov.ve", "mil.ve", "net.ve", "org.ve",
    "com.vn", "net.vn", "org.vn", "edu.vn", "gov.vn", "ac.vn", "biz.vn", "info.vn",
    "co.za", "org.za", "ac.za", "gov.za", "net.za", "web.za", "school.za",
    "co.zm", "ac.zm", "gov.zm", "org.zm", "sch.zm",
    "co.zw", "ac.zw", "gov.zw", "org.zw",
    # hosting platforms that hand out per-tenant subdomains
    "blogspot.com", "blogspot.co.uk", "blogspot.jp",
    "amazonaws.com", "s3.amazonaws.com",
    "appspot.com", "firebaseapp.com",
    "azurewebsites.net", "cloudfront.net", "herokuapp.com",
    "pages.dev", "workers.dev", "r2.dev",
    "github.io", "gitlab.io", "netlify.app", "vercel.app",
)

PUBLIC_SUFFIXES: frozenset[str] = frozenset(_SUFFIX_ENTRIES)


def normalize_domain(domain: str) -> str:
    return (domain or "").strip().lower().removesuffix(".")


def organizational_domain(domain: str) -> str:
    """Return the registrable domain for ``domain``.

    The longest matching suffix wins: for ``a.b.c.d`` the candidates are
    ``b.c.d`` then ``c.d``. Without a match the last label is assumed to be a
    single-level TLD.

    >>> organizational_domain("mail.example.co.jp")
    'example.co.jp'
    >>> organizational_domain("aaa.bbb.google.com")
    'google.com'
    """

    clean = normalize_domain(domain)
    if not clean:
        return ""
    labels = clean.split(".")
    if len(labels) <= 1:
        return clean

    for index in range(1, len(labels) - 1):
        candidate = ".".join(labels[index:])
        if candidate in PUBLIC_SUFFIXES:
            return ".".join(labels[index - 1 :])
    return ".".join(labels[-2:])
